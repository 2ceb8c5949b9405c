"""Time arithmetic, carer colours and day ranges."""
