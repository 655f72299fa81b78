from rest_framework import serializers
from progress_app.models import CourseProgress, QuizAttempt


class QuizAttemptSerializer(serializers.ModelSerializer):
    """Read-only representation of a recorded attempt"""
    userId = serializers.IntegerField(source='user_id', read_only=True)
    quizId = serializers.UUIDField(source='quiz_id', read_only=True)
    courseId = serializers.UUIDField(source='course_id', read_only=True)
    attemptedAt = serializers.DateTimeField(source='attempted_at', read_only=True)

    class Meta:
        model = QuizAttempt
        fields = ('id', 'userId', 'quizId', 'courseId', 'correct', 'total', 'score', 'attemptedAt')
        read_only_fields = fields


class QuizAttemptCreateSerializer(serializers.Serializer):
    """Input for POST /api/progress/quiz-attempt/; score defaults to the percentage of correct answers"""
    quizId = serializers.UUIDField(source='quiz_id')
    courseId = serializers.UUIDField(source='course_id', required=False, allow_null=True)
    correct = serializers.IntegerField(min_value=0, required=False, default=0)
    total = serializers.IntegerField(min_value=0, required=False, default=0)
    score = serializers.FloatField(required=False, allow_null=True, min_value=0)

    def validate(self, attrs):
        if attrs['correct'] > attrs['total']:
            raise serializers.ValidationError({'correct': 'correct must not exceed total.'})
        return attrs


class CourseProgressSerializer(serializers.ModelSerializer):
    courseId = serializers.UUIDField(source='course_id', read_only=True)
    percentComplete = serializers.IntegerField(source='percent_complete', read_only=True)
    completedItems = serializers.JSONField(source='completed_items', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = CourseProgress
        fields = ('courseId', 'percentComplete', 'completedItems', 'updatedAt')
        read_only_fields = fields


class CompleteItemSerializer(serializers.Serializer):
    itemId = serializers.CharField(max_length=255)
