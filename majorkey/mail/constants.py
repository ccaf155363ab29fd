"""Constantes e limites da API de envio de emails."""
from datetime import timedelta

API_HOST = "https://api.sendgrid.com"
MAILJET_API_HOST = "https://api.mailjet.com"
VERSION = "1.0.0"

PERSONALIZATION_LIMIT = 1000
RECIPIENT_LIMIT = 1000
SUBSTITUTION_LIMIT = 10000
SCHEDULE_LIMIT = timedelta(hours=72)

CATEGORY_TOTAL_LIMIT = 10
CATEGORY_CHARACTER_LIMIT = 255

CUSTOM_ARGUMENTS_MAXIMUM_BYTES = 10000

UNSUBSCRIBE_GROUPS_MAXIMUM_DISPLAY = 25

SPAM_THRESHOLD_RANGE = range(1, 11)

PAGE_LIMIT_RANGE = range(1, 501)
STATISTIC_FILTER_RANGE = range(1, 11)

# Cabeçalhos controlados pelo provedor; não podem ser definidos pelo chamador
RESERVED_HEADERS = frozenset({
    'x-sg-id',
    'x-sg-eid',
    'received',
    'dkim-signature',
    'content-type',
    'content-transfer-encoding',
    'to',
    'from',
    'subject',
    'reply-to',
    'cc',
    'bcc',
})

SUBSCRIPTION_TRACKING_DEFAULT_PLAIN_TEXT = ("If you would like to unsubscribe and stop receiving "
                                            "these emails click here: <% %>.")
SUBSCRIPTION_TRACKING_DEFAULT_HTML = ("<p>If you would like to unsubscribe and stop receiving "
                                      "these emails <% click here %>.</p>")
