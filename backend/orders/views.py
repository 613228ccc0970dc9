import logging

from django.utils import timezone
from rest_framework import status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import IllegalTransitionError, OrderNotFoundError
from .models import OrderActor
from .serializers import (
    ConfirmationEventSerializer,
    IntakeCheckSerializer,
    IntakeDecisionSerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from .services import OrderIntakeService, OrderStatusMachine
from .stores import get_order_store

logger = logging.getLogger(__name__)


class OrderDetailView(APIView):
    """Retrieve a single order"""
    permission_classes = [permissions.AllowAny]

    def get(self, request, pk):
        try:
            order = get_order_store().get(pk)
        except OrderNotFoundError as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)


class OrderStatusUpdateView(APIView):
    """
    Move an order through its lifecycle.

    Returns:
    - 200: Transition applied (or order already had that status)
    - 400: Unknown status value
    - 404: Unknown order
    - 409: Transition not allowed from the current status
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request, pk):
        store = get_order_store()
        try:
            order = store.get(pk)
        except OrderNotFoundError as e:
            return Response({"error": str(e)}, status=status.HTTP_404_NOT_FOUND)

        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = OrderStatusMachine.transition(
                order,
                data["status"],
                message=data.get("message"),
                actor=data.get("actor", OrderActor.BUSINESS),
            )
        except IllegalTransitionError as e:
            return Response(
                {
                    "error": str(e),
                    "current_status": e.current_status,
                    "attempted_status": e.attempted_status,
                },
                status=status.HTTP_409_CONFLICT,
            )

        if result.changed:
            store.save(result.order)

        confirmation = None
        if result.confirmation is not None:
            confirmation = ConfirmationEventSerializer(result.confirmation).data

        return Response({
            "order": OrderSerializer(result.order).data,
            "previous_status": result.previous_status,
            "changed": result.changed,
            "confirmation": confirmation,
        })


class OrderIntakeCheckView(APIView):
    """Advise whether a new order can be taken right now"""
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        """
        Body:
        - base_item_prep_minutes: Preparation time of the items (required)
        - current_hour_order_count: Optional snapshot; defaults to orders stored in the last hour
        - at: Optional ISO 8601 datetime to check instead of now
        """
        serializer = IntakeCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        now = data.get("at") or timezone.now()
        service = OrderIntakeService()

        count = data.get("current_hour_order_count")
        if count is None:
            count = service.current_hour_order_count(now)

        decision = service.evaluate(count, data["base_item_prep_minutes"], now=now)
        if not decision.accepted:
            logger.info(f"Intake check rejected: {decision.reason}")

        response = IntakeDecisionSerializer({
            "accepted": decision.accepted,
            "reason": decision.reason,
            "message": decision.message,
            "initial_status": decision.initial_status,
            "estimated_ready_minutes": decision.estimated_ready_minutes,
            "current_hour_order_count": count,
        })
        return Response(response.data)
