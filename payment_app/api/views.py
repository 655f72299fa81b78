from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from core.utils import exceptions as errors
from payment_app.api.serializers import PaymentSerializer, VerifyPaymentSerializer
from payment_app.services.orders import OrderService
from payment_app.services.verification import PaymentVerifier


class CreateOrderView(APIView):
    """
    POST /api/payments/courses/{pk}/create-order/
    Creates a gateway order for the course price.
    Responses:
      - 200: {'order': {...}}
      - 400: Course has no price set.
      - 404: Course not found.
      - 503: Gateway not configured outside dev mode.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        order = OrderService().create_order(pk, request.user)
        return Response({'order': order}, status=status.HTTP_200_OK)


class VerifyPaymentView(APIView):
    """
    POST /api/payments/verify-payment/
    Body: {razorpay_payment_id, razorpay_order_id, razorpay_signature, courseId}
    (paymentId, orderId and signature are accepted as well)

    Verifies the gateway signature, stores the payment and enrolls the user in
    one transaction. Replaying the same payment returns the stored record.
    Failures are returned as {'success': False, 'message': ...}.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = VerifyPaymentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'message': 'Missing parameters'}, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        try:
            result = PaymentVerifier().verify(
                payment_id=data['payment_id'],
                order_id=data['order_id'],
                signature=data['signature'],
                course_id=data['course_id'],
                user=request.user,
                raw=dict(request.data),
            )
        except errors.NotFoundError:
            return Response({'success': False, 'message': 'Course not found'}, status=status.HTTP_400_BAD_REQUEST)
        except errors.PlatformError as exc:
            return Response({'success': False, 'message': str(exc.detail)}, status=exc.status_code)

        return Response({
            'success': True,
            'message': result.message,
            'payment': PaymentSerializer(result.payment).data,
        }, status=status.HTTP_200_OK)
