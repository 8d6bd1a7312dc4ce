# API Serializers
from .suppliers import (
    SupplierSerializer, SupplierDetailSerializer, SupplierWriteSerializer, SupplierRatingSerializer,
)
from .materials import MaterialSerializer
from .orders import (
    OrderLogSerializer, OrderSerializer, OrderDetailSerializer,
    OrderCreateSerializer, OrderUpdateSerializer, ShipOrderSerializer, CancelOrderSerializer,
    OrderListQuerySerializer,
)
from .sourcing import (
    InquirySerializer, InquiryWriteSerializer,
    QuotationSerializer, QuotationSubmitSerializer, RejectSerializer,
)
from .invoicing import (
    ReconciliationSerializer, ReconciliationDetailSerializer, ReconciliationCreateSerializer,
    InvoiceSerializer, InvoiceUploadSerializer, InvoiceLinkSerializer,
)
from .notifications import NotificationSerializer
from .users import ChangePasswordSerializer, CurrentUserSerializer
