import enum


class NotifierBackend(str, enum.Enum):
    mailgun = "mailgun"
    smtp = "smtp"
    log = "log"


class FailurePolicy(str, enum.Enum):
    # isolate : un échec d'envoi n'interrompt pas les autres fournisseurs
    isolate = "isolate"
    # abort : le premier échec interrompt toute la demande
    abort = "abort"
