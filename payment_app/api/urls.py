from django.urls import path
from payment_app.api.views import CreateOrderView, VerifyPaymentView


urlpatterns = [
    path('courses/<str:pk>/create-order/', CreateOrderView.as_view(), name='payment-create-order'),
    path('verify-payment/', VerifyPaymentView.as_view(), name='payment-verify'),
]
