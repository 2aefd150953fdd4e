"""Interactive panels and the router that connects them."""
