DEFAULT_DELIMITER = ","
EMPTY_STRING = ""
DEFAULT_ENCODING = "utf-8"

MB = 1024 * 1024
GB = 1024 * MB

# memory guard defaults
DEFAULT_MEM_BUDGET = 0.25      # fraction of RAM a loaded table may take
DEFAULT_SAMPLE_ROWS = 50_000
OBJECT_OVERHEAD = 3.0          # python str overhead per raw byte
ROW_OVERHEAD = 96              # bytes per row: str header, tuple slot, cached count
