"""MIME type lookup, HTTP replies and a static-file request handler."""