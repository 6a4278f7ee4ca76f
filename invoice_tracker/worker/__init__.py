"""Background workers for the invoice tracker"""
from .invoice_sweeper import InvoiceSweeperWorker

__all__ = ["InvoiceSweeperWorker"]
