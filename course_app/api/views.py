from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from course_app import services
from course_app.api.serializers import CourseSerializer


class CourseListView(APIView):
    """
    GET /api/courses/
    Course catalog; lesson links are only included for courses the user may watch.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        courses = CourseSerializer(services.list_courses(), many=True, context={'user': request.user}).data
        return Response({'courses': courses}, status=status.HTTP_200_OK)


class CourseDetailView(APIView):
    """
    GET /api/courses/{pk}/
    Responses:
      - 200: {'course': {...}}
      - 404: Course not found (also for malformed ids).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        course = services.get_course(pk)
        return Response({'course': CourseSerializer(course, context={'user': request.user}).data},
                        status=status.HTTP_200_OK)


class CourseEnrollView(APIView):
    """
    POST /api/courses/{pk}/enroll/
    Enrolls the requesting user in a free course. Enrolling twice is not an error.
    Responses:
      - 200: {'success': True, 'message': 'Enrolled' | 'Already enrolled', 'course': {...}}
      - 402: Course requires payment (use the payment flow).
      - 404: Course not found.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        course = services.get_course(pk)
        added = services.enroll_free(course, request.user)
        return Response({
            'success': True,
            'message': 'Enrolled' if added else 'Already enrolled',
            'course': CourseSerializer(course, context={'user': request.user}).data,
        }, status=status.HTTP_200_OK)
