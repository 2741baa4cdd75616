from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from mde.engine import classify_data, classify_equation

app = FastAPI(title="MDE Shape Classifier API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class BoundsModel(BaseModel):
    left: float
    right: float
    top: float
    bottom: float


class EquationRequest(BaseModel):
    equation: str
    bounds: Optional[BoundsModel] = None


class DataRequest(BaseModel):
    points: list[tuple[float, Union[float, list[float]]]]
    name: str = "data"


class SummaryInfo(BaseModel):
    runtime_ms: float
    timestamp: str
    library: str


class ClassifyResponse(BaseModel):
    equation: str
    identity: str
    classifier: str
    reason: str
    features: dict
    xml: str
    bounds: BoundsModel
    summary: SummaryInfo


@app.post("/api/classify", response_model=ClassifyResponse)
def classify(req: EquationRequest):
    equation = req.equation.strip()
    if not equation:
        raise HTTPException(status_code=400, detail="Equation cannot be empty.")

    bounds = req.bounds.model_dump() if req.bounds is not None else None
    try:
        result = classify_equation(equation, bounds)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Classifier error: {str(e)}")

    return result


@app.post("/api/classify-data", response_model=ClassifyResponse)
def classify_points(req: DataRequest):
    if not req.points:
        raise HTTPException(status_code=400, detail="Data cannot be empty.")

    try:
        result = classify_data(req.points, req.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Classifier error: {str(e)}")

    return result
