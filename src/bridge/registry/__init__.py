"""Group registry bounded context.

Maps chat groups observed by the messaging client onto agency-owned
Group records.
"""
