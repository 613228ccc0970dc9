"""
Orders API Integration Tests

Full request/response cycle tests for the order endpoints.

Test Coverage:
- Order detail (200, 404)
- Status transitions (200, 400, 404, 409) and confirmation payloads
- Intake advisory with caller and store snapshots
"""
import pytest
import uuid
from datetime import timedelta

from rest_framework import status

from orders.models import OrderStatus
from orders.stores import get_order_store
from settings.config import app_settings
from settings.policy import OrderSettingsPolicy
from settings.stores import get_settings_store


@pytest.mark.integration
class TestOrderDetailAPI:
    def test_get_order(self, api_client, stored_order):
        response = api_client.get(f'/api/orders/{stored_order.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['order_number'] == stored_order.order_number
        assert response.data['status'] == "PENDING"
        assert response.data['customer']['name'] == "Lucía Gómez"
        assert response.data['item_count'] == 7
        assert response.data['total'] == "12.00"
        assert set(response.data['allowed_transitions']) == {"ACCEPTED", "CANCELLED"}

    def test_get_unknown_order(self, api_client):
        response = api_client.get(f'/api/orders/{uuid.uuid4()}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert 'error' in response.data


@pytest.mark.integration
class TestOrderStatusAPI:
    """Test POST /api/orders/<id>/status/"""

    def test_accept_order(self, api_client, stored_order, recording_dispatcher):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/', {'status': 'ACCEPTED'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['changed'] is True
        assert response.data['previous_status'] == "PENDING"
        assert response.data['order']['status'] == "ACCEPTED"
        assert response.data['confirmation']['kind'] == "ORDER_ACCEPTED"
        assert response.data['confirmation']['title'] == "¡Orden Aceptada!"
        assert response.data['confirmation']['order_number'] == stored_order.order_number

        # Persisted and forwarded
        assert get_order_store().get(stored_order.id).status == OrderStatus.ACCEPTED
        assert len(recording_dispatcher.payloads) == 1

    def test_cancel_with_reason(self, api_client, stored_order, recording_dispatcher):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/',
            {'status': 'CANCELLED', 'message': 'Sin stock de empanadas'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        timeline = response.data['order']['timeline']
        assert len(timeline) == 1
        assert timeline[0]['status'] == "CANCELLED"
        assert timeline[0]['message'] == "Sin stock de empanadas"
        assert timeline[0]['actor'] == "BUSINESS"
        assert response.data['order']['last_status_at'] == timeline[0]['timestamp']

        stored = get_order_store().get(stored_order.id)
        assert stored.timeline[-1].message == "Sin stock de empanadas"
        assert recording_dispatcher.payloads[0]['reason'] == "Sin stock de empanadas"

    def test_cancel_without_reason_uses_default(self, api_client, stored_order, recording_dispatcher):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/', {'status': 'CANCELLED'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['order']['timeline'][0]['message'] == "Cancelado por el negocio"
        assert recording_dispatcher.payloads[0]['reason'] == "Cancelado por el negocio"

    def test_timeline_grows_across_requests(self, api_client, stored_order, recording_dispatcher):
        url = f'/api/orders/{stored_order.id}/status/'
        api_client.post(url, {'status': 'ACCEPTED'}, format='json')
        response = api_client.post(
            url, {'status': 'PREPARING', 'message': 'En cocina'}, format='json'
        )

        timeline = response.data['order']['timeline']
        assert [entry['status'] for entry in timeline] == ["ACCEPTED", "PREPARING"]
        assert timeline[1]['message'] == "En cocina"

    def test_unknown_actor_is_rejected(self, api_client, stored_order):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/',
            {'status': 'CANCELLED', 'actor': 'ROBOT'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert get_order_store().get(stored_order.id).status == OrderStatus.PENDING

    def test_transition_without_confirmation(self, api_client, order_factory):
        order = get_order_store().save(order_factory(status=OrderStatus.ACCEPTED))

        response = api_client.post(
            f'/api/orders/{order.id}/status/', {'status': 'PREPARING'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['confirmation'] is None

    def test_same_status_is_noop(self, api_client, stored_order, recording_dispatcher):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/', {'status': 'PENDING'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['changed'] is False
        assert recording_dispatcher.payloads == []

    def test_illegal_transition_conflict(self, api_client, stored_order):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/', {'status': 'READY'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "PENDING" in response.data['error']
        assert "READY" in response.data['error']
        assert response.data['current_status'] == "PENDING"
        assert response.data['attempted_status'] == "READY"
        # Order untouched
        assert get_order_store().get(stored_order.id).status == OrderStatus.PENDING

    def test_unknown_status_value(self, api_client, stored_order):
        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/', {'status': 'SHIPPED'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data

    def test_missing_status(self, api_client, stored_order):
        response = api_client.post(f'/api/orders/{stored_order.id}/status/', {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_order(self, api_client):
        response = api_client.post(
            f'/api/orders/{uuid.uuid4()}/status/', {'status': 'ACCEPTED'}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_full_lifecycle(self, api_client, stored_order):
        for target in ("ACCEPTED", "PREPARING", "READY", "COMPLETED"):
            response = api_client.post(
                f'/api/orders/{stored_order.id}/status/', {'status': target}, format='json'
            )
            assert response.status_code == status.HTTP_200_OK

        assert response.data['order']['allowed_transitions'] == []

        response = api_client.post(
            f'/api/orders/{stored_order.id}/status/', {'status': 'CANCELLED'}, format='json'
        )
        assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.integration
class TestIntakeCheckAPI:
    """Test POST /api/orders/intake-check/"""

    def test_accepts_when_open(self, api_client, configured_week):
        response = api_client.post('/api/orders/intake-check/', {
            'base_item_prep_minutes': 20,
            'at': '2024-01-15T10:00:00',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['accepted'] is True
        assert response.data['reason'] is None
        assert response.data['initial_status'] == "PENDING"
        assert response.data['estimated_ready_minutes'] == 25
        assert response.data['current_hour_order_count'] == 0

    def test_rejects_when_closed(self, api_client, configured_week):
        response = api_client.post('/api/orders/intake-check/', {
            'base_item_prep_minutes': 20,
            'at': '2024-01-21T10:00:00',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['accepted'] is False
        assert response.data['reason'] == "closed"
        assert response.data['estimated_ready_minutes'] is None

    def test_caller_count_over_cap(self, api_client, configured_week):
        get_settings_store().save_order_settings(OrderSettingsPolicy(max_orders_per_hour=5))
        app_settings.reload()

        response = api_client.post('/api/orders/intake-check/', {
            'base_item_prep_minutes': 20,
            'current_hour_order_count': 5,
            'at': '2024-01-15T10:00:00',
        }, format='json')

        assert response.data['accepted'] is False
        assert response.data['reason'] == "throughput-exceeded"

    def test_store_snapshot_over_cap(self, api_client, configured_week, order_factory, local_dt):
        get_settings_store().save_order_settings(OrderSettingsPolicy(max_orders_per_hour=2))
        app_settings.reload()
        at = local_dt(2024, 1, 15, 10, 0)
        for minutes in (10, 20):
            get_order_store().save(order_factory(created_at=at - timedelta(minutes=minutes)))

        response = api_client.post('/api/orders/intake-check/', {
            'base_item_prep_minutes': 20,
            'at': '2024-01-15T10:00:00',
        }, format='json')

        assert response.data['current_hour_order_count'] == 2
        assert response.data['reason'] == "throughput-exceeded"

    def test_auto_accept_reported(self, api_client, configured_week):
        get_settings_store().save_order_settings(OrderSettingsPolicy(auto_accept_orders=True))
        app_settings.reload()

        response = api_client.post('/api/orders/intake-check/', {
            'base_item_prep_minutes': 0,
            'at': '2024-01-15T10:00:00',
        }, format='json')

        assert response.data['initial_status'] == "ACCEPTED"

    def test_negative_prep_time_rejected(self, api_client):
        response = api_client.post(
            '/api/orders/intake-check/', {'base_item_prep_minutes': -5}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'base_item_prep_minutes' in response.data
