import logging

# Loggers de bibliotecas que poluem o console em nível DEBUG
NOISY_LOGGERS = ('werkzeug', 'urllib3')


def configure_logging(logging_level: int = logging.DEBUG,
                      enable_http_log: bool = False,
                      mail_logging_level: int = None) -> None:
    """Instala o handler colorido de console para a aplicação e o cliente de emails.

    Args:
        logging_level (int): Nível do logger raiz.
        enable_http_log (bool): Mantém as mensagens do servidor HTTP e do urllib3 em INFO.
        mail_logging_level (int): Nível específico do logger ``majorkey.mail``; None herda
            o nível do logger raiz.
    """
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging_level)
    console_handler.setFormatter(MainConsoleFormatter())

    # https://stackoverflow.com/a/18379764
    for nome in NOISY_LOGGERS:
        logging.getLogger(nome).setLevel(logging.INFO if enable_http_log else logging.ERROR)

    if mail_logging_level is not None:
        logging.getLogger('majorkey.mail').setLevel(mail_logging_level)

    logging.basicConfig(handlers=[console_handler], level=logging_level)


class MainConsoleFormatter(logging.Formatter):
    """Formatter que colore cada linha conforme o nível da mensagem."""
    GREY = "\x1b[90m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    RED = "\x1b[31m"
    RESET = "\x1b[0m"
    FORMAT = "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s() - %(message)s"

    COLORS = {
        logging.DEBUG   : GREY,
        logging.INFO    : GREEN,
        logging.WARNING : YELLOW,
        logging.ERROR   : RED,
        logging.CRITICAL: RED,
    }

    def format(self, record):
        cor = type(self).COLORS.get(record.levelno, type(self).GREY)
        formatter = logging.Formatter(cor + type(self).FORMAT + type(self).RESET)
        return formatter.format(record)
