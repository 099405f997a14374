"""Tabular reports over the Client, Product and Orders tables.

This package holds the table whitelist, the fixed report queries with their
output column contracts, the HTML table renderer and the routes that put
them together. Every report is read-only and parameterless: the caller picks
a report (or a whitelisted table), never the SQL."""
