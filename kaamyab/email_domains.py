"""Email domain classification used as an abuse-prevention signal."""

from __future__ import annotations

from typing import FrozenSet, Optional

from .models import EmailDomainType


# Curated list of common disposable email providers.
# Kept small to avoid false positives.
DISPOSABLE_EMAIL_DOMAINS: FrozenSet[str] = frozenset({
    "tempmail.com",
    "temp-mail.org",
    "temp-mail.io",
    "tempail.com",
    "tempr.email",
    "tempinbox.com",
    "tempmailaddress.com",
    "tempemailgen.com",
    "tempsky.com",
    "guerrillamail.com",
    "guerrillamail.org",
    "guerrillamail.net",
    "guerrillamailblock.com",
    "sharklasers.com",
    "grr.la",
    "mailinator.com",
    "mailinater.com",
    "mailinator2.com",
    "maildrop.cc",
    "getairmail.com",
    "yopmail.com",
    "yopmail.fr",
    "yopmail.net",
    "throwaway.email",
    "throwawaymail.com",
    "dispostable.com",
    "mailnesia.com",
    "fakeinbox.com",
    "fakemailgenerator.com",
    "fakemailopen.com",
    "emailondeck.com",
    "mintemail.com",
    "mohmal.com",
    "trashmail.com",
    "trashmail.me",
    "trashmail.net",
    "trash-mail.com",
    "trash-mail.at",
    "mytrashmail.com",
    "10minutemail.com",
    "10minutemail.net",
    "10minutemail.org",
    "10minmail.com",
    "20minutemail.com",
    "20minutemail.it",
    "mailcatch.com",
    "spamgourmet.com",
    "spambox.us",
    "spamfree24.org",
    "spam4.me",
    "spamherelots.com",
    "mailforspam.com",
    "jetable.org",
    "emailfake.com",
    "getnada.com",
    "nada.email",
    "burnermail.io",
    "burner.kiwi",
    "discard.email",
    "discardmail.com",
    "mailsac.com",
    "inboxkitten.com",
    "crazymailing.com",
    "tmail.com",
    "mail-temp.com",
    "mailtemp.net",
    "mail-temporaire.fr",
    "imgv.de",
    "haribu.net",
    "emailtemporario.com.br",
    "anonymmail.net",
    "anonymbox.com",
    "emailsensei.com",
    "hidzz.com",
    "dropmail.me",
    "byom.de",
    "cuvox.de",
    "fleckens.hu",
    "armyspy.com",
    "dayrep.com",
    "einrot.com",
    "gustr.com",
    "jourrapide.com",
    "rhyta.com",
    "superrito.com",
    "teleworm.us",
})

# Consumer mailbox providers. Any other domain is assumed to be a custom
# (enterprise) domain.
FREE_EMAIL_PROVIDERS: FrozenSet[str] = frozenset({
    "gmail.com",
    "googlemail.com",
    "yahoo.com",
    "yahoo.co.uk",
    "hotmail.com",
    "hotmail.co.uk",
    "outlook.com",
    "live.com",
    "msn.com",
    "icloud.com",
    "me.com",
    "mac.com",
    "aol.com",
    "protonmail.com",
    "proton.me",
    "zoho.com",
    "mail.com",
    "gmx.com",
    "gmx.net",
    "yandex.com",
    "yandex.ru",
})


def email_domain(email: Optional[str]) -> Optional[str]:
    """Return the lower-cased domain of ``email``, or None if it has none."""
    if not email or "@" not in email:
        return None
    domain = email.split("@")[1].strip().lower()
    return domain or None


def classify_email_domain(email: Optional[str]) -> EmailDomainType:
    domain = email_domain(email)

    if not domain:
        return EmailDomainType.STANDARD

    if domain in DISPOSABLE_EMAIL_DOMAINS:
        return EmailDomainType.DISPOSABLE

    if domain not in FREE_EMAIL_PROVIDERS:
        return EmailDomainType.ENTERPRISE

    return EmailDomainType.STANDARD


def is_disposable_email(email: Optional[str]) -> bool:
    return classify_email_domain(email) == EmailDomainType.DISPOSABLE
