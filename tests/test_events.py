"""Tests for the event bus and realtime emitter"""
import json

from storefront.cart import CartLineItem
from storefront.events import CART_UPDATED, CartUpdated, EventBus, WishlistUpdated
from storefront.realtime import RealtimeEmitter


def _item():
    return CartLineItem(id="P1", slug="p1", name="Mouse", price=500, image="/m.png")


class TestEventBus:
    """Tests for EventBus"""

    def test_delivers_only_to_matching_type(self):
        bus = EventBus()
        cart_events, wishlist_events = [], []
        bus.subscribe(CartUpdated, cart_events.append)
        bus.subscribe(WishlistUpdated, wishlist_events.append)

        bus.publish(CartUpdated(items=(_item(),)))

        assert len(cart_events) == 1
        assert wishlist_events == []

    def test_failing_listener_does_not_stop_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("listener bug")

        bus.subscribe(CartUpdated, broken)
        bus.subscribe(CartUpdated, received.append)

        bus.publish(CartUpdated(items=()))

        assert len(received) == 1

    def test_unsubscribe_callable_and_method(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(CartUpdated, received.append)
        assert bus.listener_count(CartUpdated) == 1

        unsubscribe()
        unsubscribe()  # second call is harmless
        bus.unsubscribe(CartUpdated, received.append)

        bus.publish(CartUpdated(items=()))
        assert received == []
        assert bus.listener_count(CartUpdated) == 0

    def test_listener_may_unsubscribe_while_notified(self):
        bus = EventBus()
        received = []
        holder = {}

        def once(event):
            received.append(event)
            holder["unsubscribe"]()

        holder["unsubscribe"] = bus.subscribe(CartUpdated, once)

        bus.publish(CartUpdated(items=()))
        bus.publish(CartUpdated(items=()))

        assert len(received) == 1

    def test_payload_uses_event_name(self):
        payload = CartUpdated(items=(_item(),)).to_payload()

        assert payload["event"] == CART_UPDATED == "v0-cart-updated"
        assert payload["items"][0]["id"] == "P1"


class TestRealtimeEmitter:
    """Tests for mirroring events onto Redis streams"""

    def test_emit_writes_to_session_stream(self, mock_redis):
        emitter = RealtimeEmitter(mock_redis, "sess-1")

        emitter.emit(CartUpdated(items=(_item(),)))

        args, kwargs = mock_redis.xadd.call_args
        assert args[0] == "stream:storefront:sess-1"
        assert args[1] == "*"
        payload = json.loads(args[2]["data"])
        assert payload["event"] == "v0-cart-updated"
        assert payload["session_id"] == "sess-1"
        assert payload["items"][0]["qty"] == 1
        assert kwargs["maxlen"] == 100

    def test_emit_failure_is_swallowed(self, mock_redis):
        mock_redis.xadd.side_effect = ConnectionError("upstash down")

        RealtimeEmitter(mock_redis, "sess-1").emit(CartUpdated(items=()))

    def test_attach_forwards_store_events(self, mock_redis, cart_store, bus):
        RealtimeEmitter(mock_redis, "sess-1").attach(bus)

        cart_store.add_to_cart(_item())

        assert mock_redis.xadd.call_count == 1
