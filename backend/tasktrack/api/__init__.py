"""HTTP surface — routers, per-request dependency wiring, error rendering."""
