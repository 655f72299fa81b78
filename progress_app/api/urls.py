from django.urls import path
from progress_app.api.views import CompleteItemView, CourseProgressView, QuizAttemptView


urlpatterns = [
    path('quiz-attempt/', QuizAttemptView.as_view(), name='quiz-attempt'),
    path('course/<str:course_id>/', CourseProgressView.as_view(), name='course-progress'),
    path('course/<str:course_id>/complete/', CompleteItemView.as_view(), name='course-progress-complete'),
]
