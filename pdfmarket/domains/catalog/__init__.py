from pdfmarket.domains.catalog.entities import PdfDocument, BrowseFilter, FileResult

__all__ = ["PdfDocument", "BrowseFilter", "FileResult"]
