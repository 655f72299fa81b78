from rest_framework import serializers
from payment_app.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Read-only view of a stored payment; the raw callback body is not exposed"""
    userId = serializers.IntegerField(source='user_id', read_only=True)
    courseId = serializers.UUIDField(source='course_id', read_only=True)
    orderId = serializers.CharField(source='gateway_order_id', read_only=True)
    paymentId = serializers.CharField(source='gateway_payment_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Payment
        fields = ('id', 'userId', 'courseId', 'orderId', 'paymentId', 'amount', 'currency', 'status', 'createdAt')
        read_only_fields = fields


class VerifyPaymentSerializer(serializers.Serializer):
    """
    Gateway callback fields as forwarded by the client, either under the
    checkout widget's razorpay_* names or as paymentId/orderId/signature.
    Any amount in the body is ignored; the charged amount is resolved server-side.
    """
    razorpay_payment_id = serializers.CharField(required=False)
    razorpay_order_id = serializers.CharField(required=False)
    razorpay_signature = serializers.CharField(required=False)
    paymentId = serializers.CharField(required=False)
    orderId = serializers.CharField(required=False)
    signature = serializers.CharField(required=False)
    courseId = serializers.CharField(source='course_id')

    ALIASES = {
        'payment_id': ('razorpay_payment_id', 'paymentId'),
        'order_id': ('razorpay_order_id', 'orderId'),
        'signature': ('razorpay_signature', 'signature'),
    }

    def validate(self, attrs):
        resolved = {'course_id': attrs['course_id']}
        for target, names in self.ALIASES.items():
            value = next((attrs[name] for name in names if attrs.get(name)), None)
            if not value:
                raise serializers.ValidationError({target: 'This field is required.'})
            resolved[target] = value
        return resolved
