from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cafebooks.accounting.service import balance_history, delete_person
from cafebooks.db import get_db
from cafebooks.employees import schemas
from cafebooks.models import Employee
from cafebooks.store import atomic, get_record
from cafebooks.suppliers.schemas import BalanceAdjustmentResponse


router = APIRouter(prefix="/api", tags=["employees"])


@router.get("/employees", response_model=List[schemas.EmployeeResponse])
def list_employees(db: Session = Depends(get_db)):
    return db.query(Employee).order_by(Employee.full_name).all()


@router.post("/employees", response_model=schemas.EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(payload: schemas.EmployeeCreate, db: Session = Depends(get_db)):
    with atomic(db) as batch:
        employee = batch.set(Employee(**payload.model_dump()))
    return employee


@router.get("/employees/{employee_id}", response_model=schemas.EmployeeResponse)
def get_employee(employee_id: int, db: Session = Depends(get_db)):
    return get_record(db, Employee, employee_id, "Employee")


@router.put("/employees/{employee_id}", response_model=schemas.EmployeeResponse)
def update_employee(employee_id: int, payload: schemas.EmployeeUpdate, db: Session = Depends(get_db)):
    employee = get_record(db, Employee, employee_id, "Employee")
    with atomic(db) as batch:
        batch.update(employee, **payload.model_dump(exclude_unset=True, exclude_none=True))
    return employee


@router.delete("/employees/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_employee(employee_id: int, db: Session = Depends(get_db)):
    delete_person(db, "EMPLOYEE", employee_id)


@router.get("/employees/{employee_id}/ledger", response_model=List[BalanceAdjustmentResponse])
def employee_ledger(employee_id: int, db: Session = Depends(get_db)):
    get_record(db, Employee, employee_id, "Employee")
    return balance_history(db, "EMPLOYEE", employee_id)
