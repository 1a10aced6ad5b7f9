from zoom_alert_proxy.cli import app

app()
