import warnings

from selva_app.api import create_app

# Suppress noisy warnings for cleaner output
warnings.filterwarnings('ignore', category=UserWarning, module='pydantic')

app = create_app()

if __name__ == "__main__":
    print("Protocolo Selva backend started! API available at http://localhost:3000")
    import uvicorn
    # Run using the local app instance. Use reload in development.
    uvicorn.run("main:app", host="0.0.0.0", port=3000, log_level="info")


@app.get("/")
def root():
    return {"status": "ok", "message": "Protocolo Selva API running"}
