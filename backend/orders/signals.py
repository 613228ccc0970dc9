from django.dispatch import Signal

# Sent once per successful status change (never for no-op transitions).
# kwargs: order, previous_status, confirmation, message
order_status_changed = Signal()
