"""Web Log Analytics - Constants and patterns"""

import re

VERSION = "1.0.0"

# Input layout
CSV_FIELDS = ('ip', 'timestamp', 'url', 'status', 'user_agent')
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$')
BUCKET_FORMAT = "%Y-%m-%d %H:%M"
BUCKET_WIDTH = 16

# Defaults
DEFAULT_PAGE_LIMIT = 3
DEFAULT_FAILED_STATUSES = frozenset({404, 500})
DEFAULT_SUSPICIOUS_THRESHOLD = 3
DEFAULT_BUCKET_MINUTES = 1
MAX_RECORDED_ERRORS = 100

# Analysis names, in report order
ANALYSES = (
    'total_requests',
    'status_codes',
    'top_pages',
    'traffic_sources',
    'suspicious_ips',
    'traffic_trend',
)

# Literal tags prefixed to each exported row
REPORT_LABELS = {
    'total_requests': "Total Requests:",
    'status_codes': "Status Code Analysis:",
    'top_pages': "Most Visited Pages:",
    'traffic_sources': "Traffic Source Analysis:",
    'suspicious_ips': "Suspicious IPs:",
    'traffic_trend': "Traffic Trend:",
}

# Column headings for console tables
REPORT_COLUMNS = {
    'status_codes': ("Status", "Requests"),
    'top_pages': ("URL", "Visits"),
    'traffic_sources': ("User Agent", "Requests"),
    'suspicious_ips': ("IP Address", "Failed Requests"),
    'traffic_trend': ("Time Bucket", "Requests"),
}

PARTITION_FILE = "part-00000.csv"

BOM = "\ufeff"
UNDECODABLE = "\ufffd"
