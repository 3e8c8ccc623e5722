"""Registration, login and current-user endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..core.logger import setup_logger
from ..core.security import create_access_token, get_current_user, hash_password, verify_password
from ..database.models import Profile, User
from ..database.session import get_db
from ..schemas.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse

router = APIRouter()
logger = setup_logger(__name__)

MIN_PASSWORD_LENGTH = 6


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account with an empty profile and sign the user in."""
    name = payload.name.strip()
    email = payload.email.strip().lower()
    if not name or not email or not payload.password:
        raise HTTPException(status_code=400, detail="Nome, email e senha são obrigatórios")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="A senha deve ter no mínimo 6 caracteres")

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Este email já está cadastrado")

    admin_emails = {e.strip().lower() for e in get_settings().ADMIN_EMAILS}
    user = User(
        name=name,
        email=email,
        password=hash_password(payload.password),
        role="admin" if email in admin_emails else "user",
    )
    user.profile = Profile()
    db.add(user)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Register failed")
        raise HTTPException(status_code=500, detail="Erro interno do servidor") from e
    db.refresh(user)

    return TokenResponse(
        message="Conta criada com sucesso!",
        token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    if not email or not payload.password:
        raise HTTPException(status_code=400, detail="Email e senha são obrigatórios")

    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Email ou senha incorretos")

    return TokenResponse(
        message="Login realizado com sucesso!",
        token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user
