from .account import Account
from .auditlog import AuditLog
from .company import Company
from .invoice import CustomerInvoice, InvoiceLine
from .journal import Journal, JournalEntry, JournalLine
from .partner import Partner
from .period import FiscalPeriod
