"""Card domain shared by the War engines."""
