"""CRM demo app — accounts, contacts, opportunities, cases, notes and invoices."""
