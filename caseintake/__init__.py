"""Case intake form logic.

Keeps a case form's primary contact and contact summary panel in step with
the linked customer, and rejects a second active case for the same customer.
"""

__version__ = "0.1.0"
