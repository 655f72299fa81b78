from django.urls import path
from quiz_app.api.views import QuizDetailView, QuizListCreateView, QuizPublishView, QuizSubmitView


urlpatterns = [
    path('quizzes/', QuizListCreateView.as_view(), name='quiz-list'),
    path('quizzes/<str:pk>/', QuizDetailView.as_view(), name='quiz-detail'),
    path('quizzes/<str:pk>/publish/', QuizPublishView.as_view(), name='quiz-publish'),
    path('quizzes/<str:pk>/submit/', QuizSubmitView.as_view(), name='quiz-submit'),
]
