from app.core.application import create_application

# Global instance for uvicorn: `uvicorn app.main:app --reload`
app = create_application()
