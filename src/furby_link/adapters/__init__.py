"""Host adapters feeding raw editor events into the link."""
