from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('auth_app.api.urls')),
    path('api/', include('quiz_app.api.urls')),
    path('api/courses/', include('course_app.api.urls')),
    path('api/payments/', include('payment_app.api.urls')),
    path('api/progress/', include('progress_app.api.urls')),
]
