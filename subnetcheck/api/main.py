from fastapi import FastAPI
from subnetcheck.api.routes import analyze
from subnetcheck.api.middleware import AuthMiddleware
from dotenv import load_dotenv

load_dotenv()
app = FastAPI(title="subnetcheck")
app.add_middleware(AuthMiddleware)

app.include_router(analyze.router)

@app.get("/health")
def health():
    return {"status": "ok"}
