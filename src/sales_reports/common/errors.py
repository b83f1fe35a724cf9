"""Exception hierarchy shared by the store, the report service and the CLI."""


class SalesReportError(Exception):
    """Base class for every failure raised while producing a sales report."""


class StoreInitError(SalesReportError):
    """The sales store could not be configured (missing credentials, unknown backend)."""


class SalesFetchError(SalesReportError):
    """The sales store was reachable at startup but the query failed."""


class ReportRenderError(SalesReportError):
    """Drawing the PDF failed part way through; no document is produced."""
