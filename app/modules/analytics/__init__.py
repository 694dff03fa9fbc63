# Analytics module (read-only reports over loans and repayments)
