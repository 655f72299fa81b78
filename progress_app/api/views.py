from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from core.utils import exceptions as errors
from course_app.services import get_course
from progress_app import services
from progress_app.api.serializers import (
    CompleteItemSerializer,
    CourseProgressSerializer,
    QuizAttemptCreateSerializer,
    QuizAttemptSerializer,
)
from quiz_app.models import Quiz


class QuizAttemptView(APIView):
    """
    POST /api/progress/quiz-attempt/
    Appends a finished attempt for the requesting user. This is a separate call
    from quiz submission; a client that never sends it leaves no attempt behind.
    Responses:
      - 201: {'attempt': {...}}
      - 400: Invalid body.
      - 404: Unknown quiz or course.
      - 500: Storage failure (logged, generic body).
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = QuizAttemptCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        quiz = Quiz.objects.filter(pk=data['quiz_id']).first()
        if quiz is None:
            raise errors.NotFoundError('Quiz not found')
        course = get_course(data['course_id']) if data.get('course_id') else None

        attempt = services.record_attempt(
            user=request.user,
            quiz=quiz,
            course=course,
            correct=data['correct'],
            total=data['total'],
            score=data.get('score'),
        )
        return Response({'attempt': QuizAttemptSerializer(attempt).data}, status=status.HTTP_201_CREATED)


class CourseProgressView(APIView):
    """
    GET /api/progress/course/{course_id}/
    Returns (and lazily creates) the requester's progress plus the number of recorded quiz attempts.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, course_id):
        course = get_course(course_id)
        progress = services.get_course_progress(request.user, course)
        return Response({
            'progress': CourseProgressSerializer(progress).data,
            'quizzesAttempted': services.attempts_count(request.user, course),
        }, status=status.HTTP_200_OK)


class CompleteItemView(APIView):
    """
    POST /api/progress/course/{course_id}/complete/
    Body: {'itemId': '<lesson id>'}; completing an item twice counts once.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, course_id):
        serializer = CompleteItemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        course = get_course(course_id)
        progress = services.complete_item(request.user, course, serializer.validated_data['itemId'])
        return Response({'progress': CourseProgressSerializer(progress).data}, status=status.HTTP_200_OK)
