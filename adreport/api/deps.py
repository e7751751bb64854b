"""
Dependencies for authentication, database sessions, and report ownership.
"""
from typing import Generator
from fastapi import Depends, HTTPException, status, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from adreport.database import SessionLocal
from adreport.models.db import User, ReportFile
from adreport.utils import get_logger

logger = get_logger(__name__)
security = HTTPBearer()

def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.
    Ensures proper session lifecycle management with automatic cleanup.
    
    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error("Database session error", error=str(e), exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate user from API key.
    
    Raises:
        HTTPException: If API key is invalid or user is inactive
    """
    api_key = credentials.credentials
    
    user = db.query(User).filter(
        User.api_key == api_key,
        User.is_active == True
    ).first()
    
    if not user:
        logger.warning(
            "Authentication failed: invalid or inactive API key",
            api_key_prefix=api_key[:10] + "..." if len(api_key) > 10 else api_key
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or inactive API key",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    logger.debug("User authenticated", user_id=user.id)
    return user

def get_owned_report(
    report_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> ReportFile:
    """Report file owned by the caller; anyone else's report is reported as missing."""
    report = db.query(ReportFile).filter(
        ReportFile.id == report_id,
        ReportFile.user_id == current_user.id
    ).first()
    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="报告不存在"
        )
    return report
