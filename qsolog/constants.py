# Suggested filename for exported logs
EXPORT_FILENAME = "export.adi"

PROGRAM_ID = "qsolog"

QRZ_XML_URL = "https://xmldata.qrz.com/xml/current/"

# Total seconds allowed for a single request to the QRZ XML service
QRZ_TIMEOUT_S = 10

# Environment variable the CLI reads the QRZ password from
QRZ_PASSWORD_ENV = "QRZ_PASSWORD"

# Columns shown by the CLI table, in order
DEFAULT_COLUMNS = ("call", "band", "mode", "qso_date", "time_on")

