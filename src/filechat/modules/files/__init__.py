"""FileChat Files Module - Upload, storage records and shallow analysis."""
