"""Sales report endpoint for TechNorth

This feature renders every stored sale into a downloadable PDF: company
header, a paginated table of sales newest first, and the grand total.
The router only translates outcomes to HTTP; fetching and layout live in
the service and layout modules."""
