"""Launch the fare estimator FastAPI server."""

import uvicorn


def main():
    uvicorn.run("fare_estimator.server:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    main()
