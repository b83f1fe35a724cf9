import os

# In a real deployment, these come from the environment (or a .env file loaded by the process manager)
SALES_STORE_BACKEND: str = os.getenv("SALES_STORE_BACKEND", "firestore")  # "firestore" or "tortoise"
FIREBASE_CREDENTIALS: str = os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json")
SALES_COLLECTION: str = os.getenv("SALES_COLLECTION", "sales")
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./sales_reports.sqlite3")

REPORT_LOGO_PATH: str = os.getenv("REPORT_LOGO_PATH", "technorth.jpeg")
REPORT_TIMEZONE: str = os.getenv("REPORT_TIMEZONE", "UTC")
REPORT_FILENAME: str = os.getenv("REPORT_FILENAME", "Reporte_Ventas_TechNorth.pdf")

HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3001"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

TORTOISE_ORM_CONFIG = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {
            "models": [
                "sales_reports.features.sales.models",
                "aerich.models",  # For Aerich migrations
            ],
            "default_connection": "default",
        }
    },
    "use_tz": True,
    "timezone": "UTC",
}
