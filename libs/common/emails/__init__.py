"""
Transactional email package.

Modules:
- core: MailerSend HTTP client and the base send_email function
- store: store order email templates
"""
