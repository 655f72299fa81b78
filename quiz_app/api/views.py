from rest_framework.views import APIView # DRF base class
from rest_framework.response import Response # HTTP responses
from rest_framework import status # HTTP codes
from rest_framework.permissions import IsAuthenticated # gate by auth
from auth_app.models import role_of
from core.utils.permissions import IsInstructorOrReadOnly
from quiz_app.api.serializers import (
    QuizCreateSerializer,
    QuizSerializer,
    QuizSubmitSerializer,
    QuizUpdateSerializer,
)
from quiz_app.services import grading, quiz_store
from quiz_app.services.redaction import redact, redact_many


def _quiz_view(quiz, user) -> dict:
    """Serializes a quiz and applies the answer redaction for the requester's role"""
    return redact(QuizSerializer(quiz).data, role_of(user))


class QuizListCreateView(APIView):
    """
    GET  /api/quizzes/?courseId=<uuid>
    POST /api/quizzes/

    Listing is open to every authenticated user; correct answers are removed
    for students. Creating requires the instructor role.
    Responses:
      - 200/201: {'quizzes': [...]} / {'success': True, 'quiz': {...}}
      - 400: invalid courseId or question validation failure (names the question).
      - 401: Not authenticated.
      - 403: Not an instructor.
      - 409: Slug already in use.
    """
    permission_classes = [IsInstructorOrReadOnly]

    def get(self, request):
        quizzes = quiz_store.visible_quizzes(request.user, request.query_params.get('courseId'))
        data = QuizSerializer(quizzes, many=True).data
        return Response({'quizzes': redact_many(data, role_of(request.user))}, status=status.HTTP_200_OK)

    def post(self, request):
        serializer = QuizCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        quiz = quiz_store.create_quiz(request.user, serializer.validated_data)
        return Response(
            {'success': True, 'quiz': _quiz_view(quiz, request.user)},
            status=status.HTTP_201_CREATED,
        )


class QuizDetailView(APIView):
    """
    GET         /api/quizzes/{id}/
    PUT / PATCH /api/quizzes/{id}/
    DELETE      /api/quizzes/{id}/

    Writes are limited to the instructor who created the quiz. Every
    successful update leaves the quiz published (one-way latch).
    """
    permission_classes = [IsInstructorOrReadOnly]

    def get(self, request, pk):
        quiz = quiz_store.get_visible_quiz(pk, request.user)
        return Response({'quiz': _quiz_view(quiz, request.user)}, status=status.HTTP_200_OK)

    def put(self, request, pk):
        quiz = quiz_store.get_quiz(pk)
        quiz_store.require_owner(quiz, request.user)
        serializer = QuizUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        quiz = quiz_store.update_quiz(quiz, request.user, serializer.validated_data)
        quiz = quiz_store.get_quiz(quiz.pk)  # reload questions after replacement
        return Response({'success': True, 'quiz': _quiz_view(quiz, request.user)}, status=status.HTTP_200_OK)

    def patch(self, request, pk):
        return self.put(request, pk)

    def delete(self, request, pk):
        quiz = quiz_store.get_quiz(pk)
        quiz_store.delete_quiz(quiz, request.user)
        return Response({'success': True, 'message': 'deleted'}, status=status.HTTP_200_OK)


class QuizPublishView(APIView):
    """
    POST /api/quizzes/{id}/publish/
    Marks the quiz as published; owner only.
    """
    permission_classes = [IsInstructorOrReadOnly]

    def post(self, request, pk):
        quiz = quiz_store.publish_quiz(quiz_store.get_quiz(pk), request.user)
        return Response(
            {'success': True, 'message': 'Quiz published', 'quiz': _quiz_view(quiz, request.user)},
            status=status.HTTP_200_OK,
        )


class QuizSubmitView(APIView):
    """
    POST /api/quizzes/{id}/submit/
    Body: {'answers': [{'questionId', 'selectedOptionId'}, ...], 'record': false}

    Scores the answers and returns feedback disclosing the correct option of
    every answered question. Nothing is stored unless 'record' is true, in which
    case the attempt is appended to the progress ledger after scoring.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        serializer = QuizSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        quiz = quiz_store.get_visible_quiz(pk, request.user)
        answers = serializer.validated_data['answers']

        if not serializer.validated_data['record']:
            result = grading.grade(quiz, answers)
            return Response({'success': True, **result}, status=status.HTTP_200_OK)

        result, attempt = grading.grade_and_record(quiz, request.user, answers)
        body = {'success': True, **result, 'attempt': str(attempt.id) if attempt else None}
        return Response(body, status=status.HTTP_200_OK)
