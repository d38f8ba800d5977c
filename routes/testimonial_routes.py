from fastapi import APIRouter, HTTPException, Depends
from typing import List
from schemas.testimonial import Testimonial, TestimonialCreate
from crud import testimonial_crud
from crud.exceptions import TestimonialExistsError
from routes.dependencies import require_session
from services.session_service import Session

router = APIRouter()


@router.get("/", response_model=List[Testimonial])
async def get_testimonials():
    return await testimonial_crud.get_testimonials()


@router.post("/", response_model=Testimonial, status_code=201)
async def add_testimonial(testimonial: TestimonialCreate, session: Session = Depends(require_session)):
    try:
        return await testimonial_crud.add_testimonial(session.user_id, testimonial)
    except TestimonialExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/user/{user_id}", response_model=Testimonial)
async def get_user_testimonial(user_id: str):
    testimonial = await testimonial_crud.get_user_testimonial(user_id)
    if not testimonial:
        raise HTTPException(status_code=404, detail="Testimonial not found")
    return testimonial
