"""Reading portfolio exports and writing report workbooks."""
