from pdfmarket.domains.identity.entities import Account, ROLE_USER, ROLE_ADMIN

__all__ = ["Account", "ROLE_USER", "ROLE_ADMIN"]
