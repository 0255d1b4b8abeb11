from deployer.server import app  # re-use the FastAPI instance

# Expose for Hugging Face / Docker
if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "7860")))
