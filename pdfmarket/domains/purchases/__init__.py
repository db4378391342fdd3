from pdfmarket.domains.purchases.entities import Purchase, PurchaseResult

__all__ = ["Purchase", "PurchaseResult"]
