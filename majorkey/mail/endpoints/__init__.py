from .mail_send import mail_send_request
from .mailjet import MailJetMessageStatus, mailjet_send_request
from .stats import category_stats, global_stats, subuser_stats
from .subusers import list_subusers
from .suppression import (add_global_unsubscribes, BLOCKS, BOUNCES, delete_global_unsubscribe,
                          delete_suppressions, get_suppression, GLOBAL_UNSUBSCRIBES,
                          INVALID_EMAILS, list_suppressions, SPAM_REPORTS, SuppressionEndpoint)
