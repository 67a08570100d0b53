class StockForecasterError(Exception):
    """Base exception for Stock Forecaster errors."""
    
    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.
        
        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the Stock Forecaster"
        self.code = code
        self.details = details
        super().__init__(self.message)
    
    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message
    
    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }
        
        if self.code:
            error_dict['code'] = self.code
            
        if self.details:
            error_dict['details'] = self.details
            
        return error_dict


class ConfigError(StockForecasterError):
    """Exception raised for configuration errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Configuration error"
        super().__init__(message, code, details)


class DatabaseError(StockForecasterError):
    """Exception raised for database-related errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Database error"
        super().__init__(message, code, details)


class ValidationError(StockForecasterError):
    """Exception raised for invalid input, before any computation starts."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Validation error"
        super().__init__(message, code, details)


class NotFoundError(StockForecasterError):
    """Exception raised when a requested item or order is not found."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Resource not found"
        super().__init__(message, code, details)


class ForecastError(StockForecasterError):
    """Exception raised for forecasting-related errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Forecasting error"
        super().__init__(message, code, details)


class OrderError(StockForecasterError):
    """Exception raised for order-related errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Order error"
        super().__init__(message, code, details)


class ItemError(StockForecasterError):
    """Exception raised for inventory item errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Item error"
        super().__init__(message, code, details)
