# API Views
from .auth import ChangePasswordView, LoginView, LogoutView, RefreshView
from .health import health_check
from .users import CurrentUserView
from .suppliers import SupplierViewSet
from .materials import MaterialViewSet
from .orders import OrderViewSet
from .sourcing import InquiryViewSet, QuotationViewSet
from .invoicing import InvoiceViewSet, ReconciliationViewSet
from .notifications import NotificationViewSet
