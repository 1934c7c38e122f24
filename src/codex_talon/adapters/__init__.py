"""Host adapters embedding the Talon protocol in editor UIs."""
