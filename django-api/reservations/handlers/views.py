"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from reservations import conf
from reservations.domain.errors import DomainError, ErrorCode
from reservations.handlers.serializers import (
    AttractionSerializer,
    BookingRequestSerializer,
    BookingSerializer,
    DateWindowQuerySerializer,
    GiftInstrumentQuerySerializer,
    GiftInstrumentSerializer,
    GiftInstrumentWriteSerializer,
    PurchaseRequestSerializer,
    PurchaseSerializer,
    QuoteQuerySerializer,
    QuoteSerializer,
    TimeQuerySerializer,
)
from reservations.services import (
    AttractionService,
    CounterSaleService,
    GiftInstrumentLedger,
    ReservationService,
)
from reservations.stores.django_store import (
    DjangoAttractionCatalog,
    DjangoBookingStore,
    DjangoGiftInstrumentStore,
    DjangoPurchaseStore,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ATTRACTION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ATTRACTION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INSTRUMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.COMMIT_IN_PROGRESS: status.HTTP_409_CONFLICT,
    ErrorCode.CODE_COLLISION: status.HTTP_409_CONFLICT,
    ErrorCode.PERSISTENCE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message, "field": error.field}
    if error.code == ErrorCode.ATTRACTION_NOT_FOUND:
        body["listing"] = reverse("attraction-list")
    if error.code == ErrorCode.PERSISTENCE_FAILED:
        body["retryable"] = True
    return Response(body, status=ERROR_STATUS[error.code])


def invalid_request(errors: dict) -> Response:
    field, messages = next(iter(errors.items()))
    return Response(
        {
            "code": ErrorCode.VALIDATION_FAILED.value,
            "message": str(messages[0]) if isinstance(messages, list) else str(messages),
            "field": field,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def attraction_service() -> AttractionService:
    return AttractionService(DjangoAttractionCatalog())


def reservation_service() -> ReservationService:
    return ReservationService(
        DjangoAttractionCatalog(),
        DjangoBookingStore(),
        clock=timezone.now,
        window_days=conf.get("RESERVATION_WINDOW_DAYS"),
    )


def counter_sale_service() -> CounterSaleService:
    return CounterSaleService(
        DjangoAttractionCatalog(),
        DjangoPurchaseStore(),
        clock=timezone.now,
        walk_in_name=conf.get("WALK_IN_CUSTOMER_NAME"),
    )


def gift_instrument_ledger() -> GiftInstrumentLedger:
    return GiftInstrumentLedger(
        DjangoGiftInstrumentStore(),
        clock=timezone.now,
        code_prefix=conf.get("GIFT_CODE_PREFIX"),
        max_code_attempts=conf.get("GIFT_CODE_MAX_ATTEMPTS"),
    )


class AttractionListView(APIView):
    """Handler for GET /api/attractions"""

    def get(self, request: Request) -> Response:
        attractions = attraction_service().list_attractions()
        return Response(AttractionSerializer(attractions, many=True).data)


class AttractionDetailView(APIView):
    """Handler for GET /api/attractions/{attraction_id}"""

    def get(self, request: Request, attraction_id: str) -> Response:
        try:
            attraction = attraction_service().get_attraction(attraction_id)
        except DomainError as error:
            return error_response(error)
        return Response(AttractionSerializer(attraction).data)


class AttractionDatesView(APIView):
    """Handler for GET /api/attractions/{attraction_id}/dates"""

    def get(self, request: Request, attraction_id: str) -> Response:
        query = DateWindowQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_request(query.errors)
        start = query.validated_data.get("start") or timezone.localdate()
        days = query.validated_data.get("days") or conf.get("RESERVATION_WINDOW_DAYS")
        try:
            dates = attraction_service().bookable_dates(attraction_id, start, days)
        except DomainError as error:
            return error_response(error)
        return Response({"dates": [d.isoformat() for d in dates]})


class AttractionTimesView(APIView):
    """Handler for GET /api/attractions/{attraction_id}/times"""

    def get(self, request: Request, attraction_id: str) -> Response:
        query = TimeQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_request(query.errors)
        try:
            times = attraction_service().bookable_times(
                attraction_id, query.validated_data["date"]
            )
        except DomainError as error:
            return error_response(error)
        return Response({"times": [t.strftime("%H:%M") for t in times]})


class AttractionQuoteView(APIView):
    """Handler for GET /api/attractions/{attraction_id}/quote"""

    def get(self, request: Request, attraction_id: str) -> Response:
        query = QuoteQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_request(query.errors)
        try:
            quote = attraction_service().quote(
                attraction_id,
                query.validated_data["quantity"],
                query.validated_data["discount"],
            )
        except DomainError as error:
            return error_response(error)
        return Response(QuoteSerializer(quote).data)


class BookingCreateView(APIView):
    """Handler for POST /api/bookings

    Runs the whole reservation workflow from one request. The optional
    ``Idempotency-Key`` header makes retries return the original booking.
    """

    def post(self, request: Request) -> Response:
        payload = BookingRequestSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        data = payload.validated_data
        service = reservation_service()
        try:
            workflow = service.start(
                data["attraction_id"],
                idempotency_key=request.headers.get("Idempotency-Key"),
            )
            workflow.select_date(data["date"])
            workflow.select_time(data["time"])
            workflow.advance()
            workflow.set_participants(data["participants"])
            workflow.advance()
            workflow.set_customer_info(
                data["first_name"], data["last_name"], data["email"], data["phone"]
            )
            workflow.advance()
            if data["payment_method"]:
                workflow.select_payment_method(data["payment_method"])
            booking = service.complete(workflow)
        except DomainError as error:
            return error_response(error)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class PurchaseCreateView(APIView):
    """Handler for POST /api/purchases"""

    def post(self, request: Request) -> Response:
        payload = PurchaseRequestSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        data = payload.validated_data
        service = counter_sale_service()
        sale = service.start(idempotency_key=request.headers.get("Idempotency-Key"))
        try:
            if data.get("attraction_id"):
                service.select_item(sale, data["attraction_id"])
            sale.set_quantity(data["quantity"])
            sale.set_discount(data["discount"])
            sale.set_cash_received(data["amount_paid"])
            sale.set_notes(data["notes"])
            sale.set_customer(data["customer_name"], data["email"], data["phone"])
            if data.get("payment_method"):
                sale.select_payment_method(data["payment_method"])
            purchase = service.complete(sale)
        except DomainError as error:
            return error_response(error)
        if purchase is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)


class GiftInstrumentListView(APIView):
    """Handler for GET and POST /api/gift-instruments"""

    def get(self, request: Request) -> Response:
        query = GiftInstrumentQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_request(query.errors)
        params = dict(query.validated_data)
        params.setdefault("per_page", conf.get("GIFT_INSTRUMENTS_PAGE_SIZE"))
        try:
            page = gift_instrument_ledger().list_instruments(**params)
        except DomainError as error:
            return error_response(error)
        items = GiftInstrumentSerializer(
            page.items, many=True, context={"now": timezone.now()}
        ).data
        return Response(
            {
                "gift_instruments": items,
                "pagination": {
                    "current_page": page.page,
                    "last_page": page.last_page,
                    "per_page": page.per_page,
                    "total": page.total,
                },
            }
        )

    def post(self, request: Request) -> Response:
        payload = GiftInstrumentWriteSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        data = payload.validated_data
        try:
            instrument = gift_instrument_ledger().create(
                type=data.get("type", "fixed"),
                initial_value=data.get("initial_value"),
                balance=data.get("balance") or None,
                max_usage=data.get("max_usage", 1),
                description=data.get("description", ""),
                expiry_date=data.get("expiry_date"),
                created_by=str(getattr(request.user, "pk", "") or ""),
            )
        except DomainError as error:
            return error_response(error)
        return Response(
            GiftInstrumentSerializer(instrument, context={"now": timezone.now()}).data,
            status=status.HTTP_201_CREATED,
        )


class GiftInstrumentDetailView(APIView):
    """Handler for GET, PATCH and DELETE /api/gift-instruments/{code}"""

    def get(self, request: Request, code: str) -> Response:
        try:
            instrument = gift_instrument_ledger().get(code)
        except DomainError as error:
            return error_response(error)
        return Response(GiftInstrumentSerializer(instrument, context={"now": timezone.now()}).data)

    def patch(self, request: Request, code: str) -> Response:
        payload = GiftInstrumentWriteSerializer(data=request.data, partial=True)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        try:
            instrument = gift_instrument_ledger().edit(code, **payload.validated_data)
        except DomainError as error:
            return error_response(error)
        return Response(GiftInstrumentSerializer(instrument, context={"now": timezone.now()}).data)

    def delete(self, request: Request, code: str) -> Response:
        try:
            gift_instrument_ledger().soft_delete(code)
        except DomainError as error:
            return error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


class GiftInstrumentActivateView(APIView):
    """Handler for POST /api/gift-instruments/{code}/activate"""

    def post(self, request: Request, code: str) -> Response:
        try:
            instrument = gift_instrument_ledger().activate(code)
        except DomainError as error:
            return error_response(error)
        return Response(GiftInstrumentSerializer(instrument, context={"now": timezone.now()}).data)


class GiftInstrumentDeactivateView(APIView):
    """Handler for POST /api/gift-instruments/{code}/deactivate"""

    def post(self, request: Request, code: str) -> Response:
        try:
            instrument = gift_instrument_ledger().deactivate(code)
        except DomainError as error:
            return error_response(error)
        return Response(GiftInstrumentSerializer(instrument, context={"now": timezone.now()}).data)
