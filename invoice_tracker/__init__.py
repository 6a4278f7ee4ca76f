"""Invoice Tracker

Tracks asynchronous PDF generation for submitted invoices and relays status
back to polling clients.
"""
