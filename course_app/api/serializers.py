from rest_framework import serializers
from course_app.models import Course
from course_app.services import can_view_content, is_enrolled


class CourseSerializer(serializers.ModelSerializer):
    """
    Read-only course view for the requesting user (passed as context['user']).
    videoLinks is empty unless the user may watch the course; lessonCount is always shown.
    """
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)
    isFree = serializers.BooleanField(source='is_free', read_only=True)
    lessonCount = serializers.SerializerMethodField()
    videoLinks = serializers.SerializerMethodField()
    enrolled = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Course
        fields = (
            'id', 'title', 'description', 'createdBy', 'price', 'currency', 'isFree',
            'lessonCount', 'videoLinks', 'enrolled', 'createdAt',
        )
        read_only_fields = fields

    def get_lessonCount(self, course) -> int:
        return len(course.video_links or [])

    def get_videoLinks(self, course) -> list:
        if can_view_content(course, self.context.get('user')):
            return list(course.video_links or [])
        return []

    def get_enrolled(self, course) -> bool:
        user = self.context.get('user')
        return bool(user and user.is_authenticated and is_enrolled(course, user))
