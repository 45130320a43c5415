from invoice_analytics.models.invoice import Invoice, InvoiceItem
from invoice_analytics.models.role import Role, user_roles
from invoice_analytics.models.tenant import Tenant
from invoice_analytics.models.user import User
