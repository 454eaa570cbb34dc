# Standard Library
import logging
from functools import cached_property

# Django
from django.conf import settings

# Django REST Framework
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

# Local Imports
from .cart import CartStore, variation_key
from .checkout import (
    CheckoutFlow,
    EmptyCartError,
    MissingCheckoutFieldsError,
    NoActiveContactError,
    UserInfo,
    compose_inquiry_link,
)
from .permissions import FrontendOnlyPermission
from .store import contact_repository, product_repository, site_settings_service
from .utilities import _parse_payload, _to_int

logger = logging.getLogger(__name__)


def _device_uuid(request, data=None):
    data = data if data is not None else {}
    return (
        data.get("device_uuid")
        or request.headers.get("X-Device-UUID")
        or request.query_params.get("device_uuid")
        or ""
    ).strip()


def _missing_device():
    return Response({"error": "Missing device UUID."}, status=status.HTTP_400_BAD_REQUEST)


def _currency():
    return getattr(settings, "STORE_CURRENCY_LABEL", "Rp")


class _CartView(APIView):
    permission_classes = [FrontendOnlyPermission]

    @cached_property
    def store(self):
        return CartStore()

    def _cart_response(self, cart, code=status.HTTP_200_OK, **extra):
        return Response({**cart.as_dict(), **extra}, status=code)


# --------------------------
# GET/POST /api/cart/
# --------------------------
class ShowCartAPIView(_CartView):
    def get(self, request):
        return self._respond(_device_uuid(request))

    def post(self, request):
        return self._respond(_device_uuid(request, _parse_payload(request)))

    def _respond(self, device_uuid):
        if not device_uuid:
            return _missing_device()
        return self._cart_response(self.store.load(device_uuid))


# --------------------------
# POST /api/cart/add/  {product_id, variation_id?}
# --------------------------
class AddToCartAPIView(_CartView):
    def post(self, request):
        data = _parse_payload(request)
        device_uuid = _device_uuid(request, data)
        if not device_uuid:
            return _missing_device()

        product_id = data.get("product_id")
        if not product_id:
            return Response({"error": "Missing product_id."}, status=status.HTTP_400_BAD_REQUEST)

        product = product_repository().get(product_id)
        if product is None:
            return Response({"error": "Product not found."}, status=status.HTTP_404_NOT_FOUND)

        variation = None
        variation_id = variation_key(data.get("variation_id"))
        if variation_id:
            variation = next((v for v in product.get("variations") or [] if v.get("id") == variation_id), None)
            if variation is None:
                return Response({"error": "Variation not found."}, status=status.HTTP_404_NOT_FOUND)

        cart = self.store.load(device_uuid)
        item = cart.add(product, variation)
        self.store.save(device_uuid, cart)
        return self._cart_response(cart, item=item.as_dict(), is_cart_open=True)


# --------------------------
# POST /api/cart/update/  {product_id, variation_id?, quantity}
# quantity < 1 removes the line
# --------------------------
class UpdateCartItemAPIView(_CartView):
    def post(self, request):
        data = _parse_payload(request)
        device_uuid = _device_uuid(request, data)
        if not device_uuid:
            return _missing_device()

        product_id = data.get("product_id")
        quantity = _to_int(data.get("quantity"), None)
        if not product_id or quantity is None:
            return Response({"error": "product_id and quantity are required."}, status=status.HTTP_400_BAD_REQUEST)

        cart = self.store.load(device_uuid)
        cart.update_quantity(product_id, data.get("variation_id"), quantity)
        self.store.save(device_uuid, cart)
        return self._cart_response(cart)


# --------------------------
# POST /api/cart/remove/  {product_id, variation_id?}
# --------------------------
class RemoveCartItemAPIView(_CartView):
    def post(self, request):
        data = _parse_payload(request)
        device_uuid = _device_uuid(request, data)
        if not device_uuid:
            return _missing_device()

        product_id = data.get("product_id")
        if not product_id:
            return Response({"error": "Missing product_id."}, status=status.HTTP_400_BAD_REQUEST)

        cart = self.store.load(device_uuid)
        cart.remove(product_id, data.get("variation_id"))
        self.store.save(device_uuid, cart)
        return self._cart_response(cart)


class ClearCartAPIView(_CartView):
    def post(self, request):
        device_uuid = _device_uuid(request, _parse_payload(request))
        if not device_uuid:
            return _missing_device()
        self.store.clear(device_uuid)
        return Response({"items": [], "count": 0, "total": "0"}, status=status.HTTP_200_OK)


# --------------------------
# POST /api/checkout/  {name, address, phone}
# Builds the WhatsApp hand-off and clears the cart.
# --------------------------
class CheckoutAPIView(_CartView):
    def post(self, request):
        data = _parse_payload(request)
        device_uuid = _device_uuid(request, data)
        if not device_uuid:
            return _missing_device()

        cart = self.store.load(device_uuid)
        flow = CheckoutFlow(cart, currency=_currency())
        try:
            flow.open()
            handoff = flow.submit(UserInfo.from_dict(data), contact_repository().all())
        except EmptyCartError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except MissingCheckoutFieldsError as e:
            return Response({"error": str(e), "missing": e.missing}, status=status.HTTP_400_BAD_REQUEST)
        except NoActiveContactError as e:
            logger.warning("Checkout for device %s blocked: no active CS contact", device_uuid)
            return Response({"error": str(e)}, status=status.HTTP_409_CONFLICT)

        self.store.clear(device_uuid)
        return Response(
            {
                "success": True,
                "state": flow.state.value,
                "whatsapp_url": handoff.url,
                "total": str(cart.total),
                **handoff.as_dict(),
            },
            status=status.HTTP_200_OK,
        )


# --------------------------
# GET /api/inquiry-link/
# --------------------------
class InquiryLinkAPIView(APIView):
    permission_classes = [FrontendOnlyPermission]

    def get(self, request):
        site_name = site_settings_service().current.get("site_name") or ""
        handoff = compose_inquiry_link(contact_repository().all(), site_name)
        if handoff is None:
            return Response({"available": False}, status=status.HTTP_200_OK)
        return Response({"available": True, "whatsapp_url": handoff.url, **handoff.as_dict()},
                        status=status.HTTP_200_OK)
