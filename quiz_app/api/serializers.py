from rest_framework import serializers # DRF serializers base
from quiz_app.models import Quiz, Question # import our ORM models


class QuestionSerializer(serializers.ModelSerializer):
    """
    Read-only nested serializer for returning question data, answer key included.
    Viewers without authoring rights get this through quiz_app.services.redaction.
    """
    correctOptionId = serializers.CharField(source='correct_option_id', read_only=True)

    class Meta:
        model = Question
        fields = ('id', 'text', 'options', 'correctOptionId', 'explanation', 'points')
        read_only_fields = fields


class QuizSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for a quiz including nested questions in order.
    """
    courseId = serializers.UUIDField(source='course_id', read_only=True)
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)
    timeLimitMinutes = serializers.IntegerField(source='time_limit_minutes', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    questions = QuestionSerializer(many=True, read_only=True)

    class Meta:
        model = Quiz
        fields = (
            'id', 'title', 'slug', 'description', 'courseId', 'createdBy', 'published',
            'timeLimitMinutes', 'questions', 'createdAt', 'updatedAt',
        )
        read_only_fields = fields


class OptionInputSerializer(serializers.Serializer):
    """Option as sent by the client; the id is generated server-side when absent"""
    id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    text = serializers.CharField(required=False, allow_blank=True, default='')


class QuestionInputSerializer(serializers.Serializer):
    """
    Shape of one question. Content rules (text, option count, answer key) are
    checked by the quiz store so errors can name the question by position.
    """
    text = serializers.CharField(required=False, allow_blank=True, default='')
    options = OptionInputSerializer(many=True, required=False)
    correctOptionId = serializers.CharField(
        source='correct_option_id', required=False, allow_blank=True, allow_null=True, default=None
    )
    explanation = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    points = serializers.IntegerField(required=False, min_value=0, default=1)


class QuizCreateSerializer(serializers.Serializer):
    """
    Write-only input for POST /api/quizzes/. Unknown keys such as createdBy are
    dropped; the owner always is the requesting instructor.
    """
    title = serializers.CharField(max_length=255)
    courseId = serializers.CharField(source='course_id')
    questions = QuestionInputSerializer(many=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default='')
    timeLimitMinutes = serializers.IntegerField(
        source='time_limit_minutes', required=False, allow_null=True, min_value=1
    )
    slug = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    # passed through as sent; the quiz store publishes only on a JSON true
    published = serializers.JSONField(required=False, allow_null=True)


class QuizUpdateSerializer(serializers.Serializer):
    """
    Partial update input. Only the listed fields are accepted; anything else
    (createdBy, courseId, ids, timestamps) is rejected with 400 instead of
    being merged into the stored quiz.
    """
    title = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    timeLimitMinutes = serializers.IntegerField(
        source='time_limit_minutes', required=False, allow_null=True, min_value=1
    )
    slug = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    published = serializers.BooleanField(required=False)
    questions = QuestionInputSerializer(many=True, required=False)

    def validate(self, attrs):
        unknown = set(self.initial_data) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                {name: ['This field cannot be updated.'] for name in sorted(unknown)}
            )
        return attrs

    def validate_title(self, value: str) -> str:
        """
        Basic sanity validation for 'title'.
        """
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title must not be empty when provided.')
        return value


class AnswerSerializer(serializers.Serializer):
    questionId = serializers.CharField(source='question_id')
    selectedOptionId = serializers.CharField(source='selected_option_id', allow_blank=True, allow_null=True)


class QuizSubmitSerializer(serializers.Serializer):
    """
    Input for POST /api/quizzes/<id>/submit/. With record=true the attempt is
    also appended to the progress ledger.
    """
    answers = AnswerSerializer(many=True, allow_empty=True)
    record = serializers.BooleanField(required=False, default=False)
